"""Request handling for the scoring endpoints: single record or {items: [...]}."""

from rubric.scoring import controls, ets
from rubric.standards import load_standard

CONTROL_FIELDS = ("id", "name", "description", "guidance", "framework")
ET_FIELDS = ("what_to_collect", "how_to_collect", "title")


class RequestShapeError(ValueError):
    """Body parsed as JSON but isn't a record or an {items: [...]} batch."""


def extract_items(body) -> list[dict]:
    """Return the list of records carried by a request body."""
    if not isinstance(body, dict):
        raise RequestShapeError("Request body must be a JSON object")
    if "items" not in body:
        return [body]
    items = body["items"]
    if not isinstance(items, list):
        raise RequestShapeError("'items' must be a list of records")
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise RequestShapeError(f"items[{i}] must be a JSON object")
    return items


def _project(item: dict, fields: tuple) -> dict:
    return {f: item.get(f) for f in fields}


def score_payload(record_type: str, body, standard: dict | None = None) -> dict:
    """
    Score every record in the body. The response always carries a results
    list, one entry per record, in request order.
    """
    items = extract_items(body)
    standard = standard or load_standard(record_type)
    if record_type == "control":
        results = [controls.score_control(_project(i, CONTROL_FIELDS), standard) for i in items]
    elif record_type == "et":
        results = [ets.score_et(_project(i, ET_FIELDS), standard) for i in items]
    else:
        raise ValueError(f"Unknown record type: {record_type!r}")
    return {"standard_version": standard["meta"]["version"], "results": results}

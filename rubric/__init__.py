"""GRC content rubric: rule-based scoring of Controls and Evidence Tasks."""

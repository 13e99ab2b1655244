"""Service layer: schedule rules, persistence helpers and booking workflows."""

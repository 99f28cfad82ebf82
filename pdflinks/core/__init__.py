"""Pipeline orchestration, data model, configuration and the analysis log."""

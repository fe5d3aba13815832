"""crmpdf: enregistrements CRM → template HTML → PDF.

This package provides:
- Configuration loading utilities (environment / .env)
- Typed structures for queries, records and run reports
- A REST client for the remote CRM query API
- A Jinja2 template renderer working from an isolated copy of the template directory
- A headless-browser (Playwright) PDF producer
- An orchestrator running the pipeline end to end, and its CLI
"""

__all__ = [
    "config",
    "types",
    "messages",
    "errors",
    "resolver",
    "salesforce_service",
    "query_service",
    "workspace",
    "template_service",
    "pdf_service",
    "writer",
    "orchestrator",
]

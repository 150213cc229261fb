"""Housing Authority Dashboard.

This package contains the backend of a housing-authority budget and voucher
utilization dashboard: a REST API over a relational database, file ingestion
for spreadsheets and writing samples, and an LLM-backed report generator.

High-level architecture
-----------------------

The codebase is organized around three concerns:

- **Records**: budget authorities, MTW reserves, HAP expenditures,
  commitments, HCV utilization records, users and style templates. They are
  plain SQLModel entities accessed through async repositories.
- **Ingestion**: strict imports of column-named spreadsheets, and tolerant
  ingestion of loosely formatted utilization exports where column names,
  date formats and number formats vary.
- **Reporting**: prompts built from utilization data, handed to a report
  writer (pydantic-ai or a canned mock) and streamed to clients through
  Server-Sent Events, with PDF export of the result.

Core subpackages
----------------

- ``housing_dashboard.core``: logging, monitoring, database engine, entities
  and repositories.
- ``housing_dashboard.ingestion``: spreadsheet readers and the two import
  pipelines.
- ``housing_dashboard.reporting``: report writer abstraction, adapters,
  prompt construction and the report generation service.
- ``housing_dashboard.server``: the FastAPI application, routers, security
  dependencies and PDF export.
"""

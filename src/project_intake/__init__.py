"""
Project Intake - client-side orchestration for the homeowner intake pipeline.

Pipeline:
- Wizard: collect address, project type and vision into a persisted draft
- Project creation + deferred document upload
- Adaptive questionnaire driven by the server
- Scope of Work generation, tracked by polling
"""

__version__ = "0.1.0"

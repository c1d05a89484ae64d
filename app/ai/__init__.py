"""
QA Scenario Hub
AI module — scenario generation.

Submodules:
    - prompts: system / user prompt construction
    - gateway: LLM Gateway (provider routing, usage logging)
    - parser: model output → normalised scenario dicts
    - assistants: generation pipeline orchestration
"""

"""MindWell services.

- safety_service: Crisis classification runs before every LLM call
- llm_service: Completion service behind a provider-neutral interface
- chat_service: Conversation state, turn orchestration and HTTP boundary
"""

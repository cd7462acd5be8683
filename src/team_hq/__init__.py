"""Agent conversation dashboard and chat-log sync for OpenClaw teams."""

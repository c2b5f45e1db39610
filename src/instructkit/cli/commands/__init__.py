"""Top-level InstructKit commands (auto-registered by the dispatcher)."""

"""Host integrations for the history engine."""

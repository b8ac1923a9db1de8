"""Domain layer: claim model, workflow operations and client-side reconciliation."""

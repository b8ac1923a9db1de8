"""Adapters binding the verification workflow to storage, identity and transport."""

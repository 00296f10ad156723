"""Shared configuration, errors, protocols and type aliases."""

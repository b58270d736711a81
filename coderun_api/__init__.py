"""Code run history backend (users + code snippets persisted in a JSON file)."""

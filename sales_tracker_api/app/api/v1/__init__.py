"""Version 1 of the API: auth, entries and Google Form routes."""

"""reviewer-api: AI study reviewer and flashcard generation service."""

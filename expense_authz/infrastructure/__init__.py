"""Infrastructure: persistence adapters for the authorization stores."""

"""ReviewHub - business directory with user reviews."""

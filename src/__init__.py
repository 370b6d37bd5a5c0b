"""spaced-drill: in-session spaced reinforcement engine."""

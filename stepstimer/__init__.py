"""StepsTimer: a session clock with named, overlapping steps."""

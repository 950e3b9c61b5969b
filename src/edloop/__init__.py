"""EdLoop: community posts, votes and ranked feeds."""

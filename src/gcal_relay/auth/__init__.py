"""Google sign-in, identity lookup and client session handling."""

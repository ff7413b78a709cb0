"""Mirror file changes from a local to a remote host over a persistent connection."""

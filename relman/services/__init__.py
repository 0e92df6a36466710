"""Release workflows.

Services coordinate the version records (versions/), the local repository
(git/) and the remote clients (net/) to implement the CLI commands.
"""

"""Starter repopulse.toml template."""

CONFIG_FILENAME = "repopulse.toml"

DEFAULT_TOML = """\
# repopulse configuration

# One [[repos]] entry per local clone. Relative paths resolve against this file.
[[repos]]
name = "my-repo"
path = "../my-repo"
default_branch = "main"

# [[team]]
# name = "Alice Dev"
# emails = ["alice@example.com"]

[scan]
since_hours = 24          # default window when --since is not given
git_timeout = 120         # seconds per git / gh invocation
fetch = true              # git fetch --all --prune before scanning

[context]
max_diff_lines = 500      # aggregate diff is truncated past this
fallback_base = "dev"     # base used when no pull request target is found
# remote = "origin"

[output]
format = "terminal"       # terminal | json
show_commits = true
max_commits = 20

[logging]
level = "warning"         # debug | info | warning | error
json = false
"""

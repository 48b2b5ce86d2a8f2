# Marks `sessionauth.deps` as a package so `from sessionauth.deps.auth import require_user` works.

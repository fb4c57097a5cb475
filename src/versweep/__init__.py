"""Run a package's tests against every published version of its dependencies."""

"""Pack source commands."""

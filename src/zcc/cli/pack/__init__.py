"""Pack commands: browse, install and remove starter packs."""

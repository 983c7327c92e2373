"""Plan definitions shipped with ledgerplan."""

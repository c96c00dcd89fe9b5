"""SimNet: similarity network building, clustering and hover enrichment."""

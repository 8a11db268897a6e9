"""HTTP surface over the alignment and statistics layers."""

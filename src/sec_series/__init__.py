"""Financial series reconciliation and derivation engine for SEC companyfacts."""

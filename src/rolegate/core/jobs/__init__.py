"""Background job processing with ARQ."""

"""Users module: accounts, profiles and refresh token records."""

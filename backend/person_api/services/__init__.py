"""Services Layer — orchestrates core rules around store IO."""

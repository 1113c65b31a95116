"""Browser core model: configuration, referrer policies, tab memory policy, workspaces, images, downloads, address bar, shield, theme and clock."""

__version__ = "0.1.0"
"""Console stand-ins for the tray menu and native dialogs."""

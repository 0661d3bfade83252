"""Community site backend: photo gallery, events and editable site content."""

"""Domain packages of the component catalog."""

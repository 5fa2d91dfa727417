"""Editor-independent rewriting, selection and display-state logic."""

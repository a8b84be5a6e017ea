"""Source readers that turn raw tabular text into raw tables."""

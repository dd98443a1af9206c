"""Services that turn raw dictionary entries into the lexical graph."""

"""Domain layer: file locators, ingested payloads, metadata records, domain exceptions."""

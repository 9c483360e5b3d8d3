"""Strategy Lab: block-graph strategy builder, validator and simulator."""

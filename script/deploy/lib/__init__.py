"""ERC-8004 deployment tool internals: configuration, networks, forge runner and OKLink verifier."""

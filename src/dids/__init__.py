"""
┌──────────────────────────────┐
│   GET /1.0/identifiers/:did  │
│  (ninja-extra controller)    │
└──────────────┬───────────────┘
               │
┌──────────────▼───────────────┐
│   BitXHub DID registry       │
│                              │
│ - Resolve(did) view call     │
│ - gob decode -> metadata     │
│ - normalize DocAddr          │
└──────────────┬───────────────┘
               │
┌──────────────▼───────────────┐
│   IPFS                       │
│                              │
│ - cat /ipfs/<address>        │
│ - JSON -> DID document       │
└──────────────┬───────────────┘
               │
┌──────────────▼───────────────┐
│ document, or {code, message} │
│ -10000 ledger  -10001 gob    │
│ -10002 ipfs    -10003 json   │
└──────────────────────────────┘
"""

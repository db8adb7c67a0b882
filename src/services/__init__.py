"""
Application services layer (use cases).

Services orchestrate the domain logic to fulfill application use cases:
- play source normalization and quality scoring
- duplicate grouping and merge resolution
- search index synchronization and fallback search
- merge batches and health monitoring
- ingestion of provider items

Services depend on ports (interfaces) from core/, never on concrete
implementations from adapters/.
"""

"""
VodAgg - Moteur d'agrégation de catalogues vidéo.

Ce package collecte les titres de stations de ressources hétérogènes,
normalise leurs sources de lecture, fusionne les doublons selon un score
de complétude et maintient un index de recherche dérivé.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur)
- services/ : Couche application (normalisation, fusion, synchronisation, santé)
- adapters/ : Couche adaptateurs (CLI, clients HTTP des stations)
- infrastructure/ : Persistance SQLite (stockage principal et index de recherche)
"""

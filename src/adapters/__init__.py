"""
Couche adaptateurs.

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- cli/ : Interface ligne de commande (Typer + Rich)
- api/ : Clients HTTP des stations de ressources et du webhook d'alerte

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""

"""
Couche infrastructure de VodAgg.

Ce module contient les implementations concretes des ports de persistance
definis dans la couche domaine :

- persistence/ : Stockage SQLite avec SQLModel (modeles et repositories),
  une base pour les enregistrements canoniques, une autre pour l'index de recherche

Architecture hexagonale : les adapters ici implementent les ports du domaine,
permettant de changer l'implementation sans modifier la logique metier.
"""

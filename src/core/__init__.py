"""
Core: fixed-scale decimal engine.

Normalizer, arithmetic engine adapter, BigNumber value type and formatter.
Модуль не зависит от внешних систем (БД, сеть, CLI).
"""

"""
Módulo de Autenticación

Este módulo maneja la autenticación con Firebase Auth.
Valida tokens JWT de Firebase y resuelve a qué dueño pertenecen los datos.
"""

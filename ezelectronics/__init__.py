# ==============================================================================
# EZElectronics - Backend de inventario y usuarios
# ==============================================================================
# Capas (de la hoja a la raíz):
#   models/        → Entidades y enums
#   repositories/  → Persistencia en archivos JSON
#   services/      → Reglas de autorización, de inventario y servicios
#   main.py        → API JSON (Flask)
# ==============================================================================

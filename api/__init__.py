"""
API HTTP para process-map-core.

Esta capa expone endpoints REST que usan el core interno (process_map_core.engine)
para importar documentos de mapeo de procesos y exportar BPMN.

La API está diseñada para ser consumida por:
- UI web (canvas de workflows)
- Clientes externos
- Scripts de automatización
"""

"""
Pipeline de sincronización one-way: Ops Console -> ECS.

Este paquete corre como servicio de larga duración: un ciclo al arrancar
y luego uno cada CYCLE_INTERVAL_S (24 h por defecto).

Objetivos de diseño:
- Idempotencia: cada ciclo sobreescribe <GDUN>.json con lo último de Ops Console.
- Secuencial: un GDUN y un feed a la vez, con espaciado entre GDUNs.
- Errores tipados: un GDUN que falla no tumba el proceso.
"""

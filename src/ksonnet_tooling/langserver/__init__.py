"""Language server glue for ksonnet tooling"""

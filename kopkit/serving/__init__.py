"""Ingress configuration, filters and transformers for Knative Serving."""
"""Transformers and source manifest paths for Knative Eventing."""
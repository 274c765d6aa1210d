"""AI inference — structured LLM calls for the booking pipeline.

Modules:
    inference_engine            Generic provider round-trip: prompt → HTTP → tools → decode
    strategies                  PromptStrategy / DecodingStrategy protocols and shared decoding helpers
    travel_parameter_extraction Strategy pair turning a booking query into TravelParameters
    flight_recommendations      Strategy pair turning a FlightRecommendationRequest into flights
    tools                       Tool base class, registry and built-in tools

Pipeline:
    PromptStrategy → InferenceEngine.process_request → (tool round) → DecodingStrategy
"""

from bill_extractor.core.llm.service import clear_llm_cache, create_llm, llm_for_model

__all__ = ["clear_llm_cache", "create_llm", "llm_for_model"]

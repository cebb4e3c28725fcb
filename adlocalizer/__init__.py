"""
Localized ad generation: one uploaded creative in, one localized ad per
locale and ad size out.

Modules:
- core: locale orchestration (master image + derived sizes) and result assembly
- prompts: generation instructions for master and adapted images
- generator: image generation backends (Replicate, OpenAI, dry-run)
- render: deterministic center-crop resizing
- sizes: size id parsing and area ordering
- reference: locales, ad sizes and CTA phrases
- assets: reading the source image and writing results for the CLI
- config: environment settings and logging setup
"""

"""relo 核心：遍历、分类、复制、汇总"""
